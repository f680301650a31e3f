"""Starter .cvslog.toml template."""

CONFIG_FILENAME = ".cvslog.toml"

DEFAULT_TOML = """\
# cvslog configuration
version = "1.0"

[repository]
cvs_root = ""              # e.g. ":pserver:anonymous@cvs.example.org:/cvsroot"
encoding = "utf-8"
# excluded_regions = ["doc/.*", ".*\\\\.txt"]   # regexes matched against file names

[location]
type = "head"              # head | branch | tag
name = ""
fallback_to_mainline = false

[output]
format = "terminal"        # terminal | json | yaml | xml
show_summary = true
"""
