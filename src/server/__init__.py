"""HTTP service exposing gitbook2epub to interactive clients."""
