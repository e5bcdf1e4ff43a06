"""Example intent services."""
