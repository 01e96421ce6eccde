"""
Command-line scripts, installed as `nexuslib-<module>-<command>` console entrypoints.
"""
