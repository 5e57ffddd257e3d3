"""Reconstruction engine: socket state, syscall dispatch, packet assembly."""
