"""Domain packages for sqlterm."""
