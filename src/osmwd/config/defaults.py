"""
osmwd.config.defaults - Default configuration values
"""

CONFIG_FILENAME = ".osmwd.toml"

DEFAULT_CONFIG = {
    "resolver": {
        # "fast" (adjacency) or "complete" (bounded closure)
        "strategy": "fast",
        # Longest ancestor path followed by "complete"
        "max_depth": 5,
        # Drop token and edge tables after each run
        "purge_intermediate": True,
    },
    "input": {
        "path": "/tmp",
        "suffix": ".wdDump.raw.csv",
    },
    "export": {
        "enabled": True,
        "path": "/tmp",
        "name": "TMP",
    },
    "dataset": {
        "abbrev": "",
        "name": "",
        "curator": "",
    },
    "store": {
        # JSON file of the record store; empty keeps results in memory only
        "path": "",
    },
}
