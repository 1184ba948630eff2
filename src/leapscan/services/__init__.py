"""Services with I/O: fundamentals, option listings and screening."""
