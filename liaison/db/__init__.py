"""Storage support shared by store implementations."""
