"""sockdump — reconstruct socket traffic from syscall traces."""

__version__ = "0.1.0"
