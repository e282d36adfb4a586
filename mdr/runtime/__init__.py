"""Terminal runtime: raw mode, key decoding, URL launching, and the event loop."""
