from proof_fixture_toolkit.utils.file_utils import dump_json, load_json

__all__ = [
    "dump_json",
    "load_json",
]
