"""Change-set renderers: rich terminal table and JSON / YAML / XML change logs."""

FORMATS = ("terminal", "json", "yaml", "xml")
