"""solguard: static security gate for Solidity sources and EVM bytecode."""

__version__ = "0.1.0"
