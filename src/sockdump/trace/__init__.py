"""Trace-line handling: reassembly, parsing, argument decoding."""
