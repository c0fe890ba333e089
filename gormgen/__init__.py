"""gormgen - generate GORM model structs from live database schemas."""

__version__ = "0.1.0"
