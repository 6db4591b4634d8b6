"""Tag handlers translating the HTML tree into renderer callbacks."""
