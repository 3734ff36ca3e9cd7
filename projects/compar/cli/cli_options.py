import argparse
from dataclasses import MISSING, dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from compar import __version__


def positive_int(value) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise argparse.ArgumentTypeError(f"invalid int value: {value!r}")
    if isinstance(value, bool) or number < 1:
        raise argparse.ArgumentTypeError(f"must be a positive integer, got {value!r}")
    return number


@dataclass
class CompareConfig:
    needle: str = field(
        default=MISSING, metadata={"help": 'the file containing the lines to search for (the "needles")',
                                   "positional": True, "metavar": "file1"}
    )
    haystack: str = field(
        default=MISSING, metadata={"help": 'the file to search within (the "haystack")',
                                   "positional": True, "metavar": "file2"}
    )
    output: Optional[str] = field(
        default=None, metadata={"help": "write result lines to this file instead of stdout",
                                "flags": ("-o", "--output"), "metavar": "OUTPUT"}
    )
    length: Optional[int] = field(
        default=None, metadata={"help": "compare lines based on the first N characters",
                                "type": positive_int, "metavar": "N"}
    )
    found: bool = field(
        default=False, metadata={"help": "display found lines instead of missing lines"}
    )
    stat: bool = field(
        default=False, metadata={"help": "display comparison statistics at the end"}
    )
    debug: bool = field(
        default=False, metadata={"help": "trace every needle line (key, bytes, verdict) on stderr"}
    )
    progress: bool = field(
        default=True, metadata={"help": "render a progress bar on stderr while comparing"}
    )


CONFIGURABLE = {f.name for f in fields(CompareConfig) if not f.metadata.get("positional")}


def gen_parser_from_dataclass(parser, dataclass_instance_or_type):
    """Add one argument per dataclass field, driven by the field metadata."""
    for f in fields(dataclass_instance_or_type):
        meta = f.metadata
        kwargs: Dict[str, Any] = {"help": meta.get("help")}
        if meta.get("positional"):
            parser.add_argument(f.name, metavar=meta.get("metavar"), **kwargs)
            continue

        flags = meta.get("flags", ("--" + f.name.replace("_", "-"),))
        kwargs["dest"] = f.name
        kwargs["default"] = f.default
        if f.type is bool:
            kwargs["action"] = argparse.BooleanOptionalAction
        else:
            kwargs["type"] = meta.get("type", str)
            kwargs["metavar"] = meta.get("metavar")
        parser.add_argument(*flags, **kwargs)
    return parser


def add_config_args(parser):
    group = parser.add_argument_group("config")
    group.add_argument("--config", metavar="PATH", default=None,
                       help="YAML file with option defaults; command line flags take precedence")
    return group


def get_parser():
    parser = argparse.ArgumentParser(
        prog="compar",
        description="For each line in file1, check if it is present anywhere in file2.",
    )
    gen_parser_from_dataclass(parser, CompareConfig)
    add_config_args(parser)
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def load_config_file(path) -> Dict[str, Any]:
    """Read option defaults from a YAML mapping; keys may use dashes or underscores."""
    with open(path, 'rt', encoding='utf-8') as f:
        cfg_dict = yaml.safe_load(f)
    if cfg_dict is None:
        return {}
    if not isinstance(cfg_dict, dict):
        raise ValueError(f"{path}: config must be a mapping of option names to values")
    cfg_dict = {str(key).replace("-", "_"): val for key, val in cfg_dict.items()}

    unknown = sorted(set(cfg_dict) - CONFIGURABLE)
    if unknown:
        raise ValueError(f"{path}: unknown option(s): {', '.join(unknown)}")
    for f in fields(CompareConfig):
        if f.name not in cfg_dict or cfg_dict[f.name] is None:
            continue
        val = cfg_dict[f.name]
        if f.type is bool:
            if not isinstance(val, bool):
                raise ValueError(f"{path}: option '{f.name}' must be true or false")
        elif "type" in f.metadata:
            try:
                cfg_dict[f.name] = f.metadata["type"](val)
            except argparse.ArgumentTypeError as e:
                raise ValueError(f"{path}: option '{f.name}' {e}")
        else:
            cfg_dict[f.name] = str(val)
    return cfg_dict


def parse_args(argv: Optional[List[str]] = None) -> CompareConfig:
    parser = get_parser()

    pre_parser = argparse.ArgumentParser(add_help=False)
    add_config_args(pre_parser)
    pre_args, _ = pre_parser.parse_known_args(argv)
    if pre_args.config is not None:
        try:
            defaults = load_config_file(Path(pre_args.config))
        except (OSError, ValueError, yaml.YAMLError) as e:
            parser.error(f"--config: {e}")
        parser.set_defaults(**defaults)

    args = parser.parse_args(argv)
    return CompareConfig(**{f.name: getattr(args, f.name) for f in fields(CompareConfig)})
