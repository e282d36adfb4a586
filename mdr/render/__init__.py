"""Screen painting: SGR encoding, help listing, and frame composition."""
