"""Desktop shell for the hardware bandwidth monitor."""
