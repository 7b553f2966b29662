"""Pure helpers shared by the kernel and drivers."""
