"""Media session controller test suite."""
