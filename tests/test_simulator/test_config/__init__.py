"""Configuration dataclass and YAML loader tests"""
