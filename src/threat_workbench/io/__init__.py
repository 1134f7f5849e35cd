from .json_loader import dump_result_file, load_compose_file, load_threats_file

__all__ = ["dump_result_file", "load_compose_file", "load_threats_file"]
