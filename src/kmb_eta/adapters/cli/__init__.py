"""Command-line presentation adapters."""

from kmb_eta.adapters.cli.board_formatter import BoardFormatter, is_origin_terminus, to_jsonable

__all__ = ["BoardFormatter", "is_origin_terminus", "to_jsonable"]
