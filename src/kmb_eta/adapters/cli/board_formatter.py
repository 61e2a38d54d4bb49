"""Plain-text rendering of routes, stops and arrival boards."""

from dataclasses import asdict
from enum import Enum
from typing import Any

from kmb_eta.domain.models.data_unavailable import DataUnavailable
from kmb_eta.domain.models.eta import EtaSlot, ReconciledBoard, SlotStatus
from kmb_eta.domain.models.route import Bound, Route
from kmb_eta.domain.models.stop import StopDetails, StopRef

MESSAGES: dict[str, dict[str, str]] = {
    "tc": {
        "enter_code": "請輸入有效路線號碼",
        "route_not_found": "找不到該路線",
        "routes_unavailable": "無法載入路線數據，請稍後再試",
        "stops_unavailable": "未能獲取站點信息",
        "stop_not_found": "找不到該站點",
        "unknown_stop": "未知站名",
        "eta_unavailable": "未能獲取ETA信息 (站點: {stop})，請稍後再試",
        "origin_terminus": "此站為起點站，未能提供預計到達時間",
        "board_title": "預計到達時間",
        "slot_label": "第 {index} 班",
        "no_estimate": "未有預計時間",
        "cancelled": "班次取消",
        "real_time": "實時班次",
        "scheduled": "原定班次",
        "delayed": "(延誤)",
    },
    "sc": {
        "enter_code": "请输入有效路线号码",
        "route_not_found": "找不到该路线",
        "routes_unavailable": "无法载入路线数据，请稍后再试",
        "stops_unavailable": "未能获取站点信息",
        "stop_not_found": "找不到该站点",
        "unknown_stop": "未知站名",
        "eta_unavailable": "未能获取ETA信息 (站点: {stop})，请稍后再试",
        "origin_terminus": "此站为起点站，未能提供预计到达时间",
        "board_title": "预计到达时间",
        "slot_label": "第 {index} 班",
        "no_estimate": "未有预计时间",
        "cancelled": "班次取消",
        "real_time": "实时班次",
        "scheduled": "原定班次",
        "delayed": "(延误)",
    },
    "en": {
        "enter_code": "Please enter a valid route number",
        "route_not_found": "Route not found",
        "routes_unavailable": "Unable to load route data, please try again later",
        "stops_unavailable": "Unable to load stop information",
        "stop_not_found": "Stop not found",
        "unknown_stop": "Unknown stop",
        "eta_unavailable": "Unable to load arrival times (stop: {stop}), please try again later",
        "origin_terminus": "This is the origin terminus; no arrival estimate is available",
        "board_title": "Estimated arrival times",
        "slot_label": "Bus {index}",
        "no_estimate": "No estimate",
        "cancelled": "Cancelled",
        "real_time": "Real-time",
        "scheduled": "Scheduled",
        "delayed": "(Delayed)",
    },
}


class BoardFormatter:
    """Renders the data model as localized lines of text."""

    def __init__(self, language: str = "tc") -> None:
        self._messages = MESSAGES.get(language, MESSAGES["tc"])

    def message(self, key: str, **kwargs: Any) -> str:
        """Look up a localized message and fill in its placeholders."""
        return self._messages[key].format(**kwargs)

    def format_route(self, route: Route) -> str:
        """Format a variant as "origin → destination"."""
        return f"{route.code}  {route.origin_name} → {route.dest_name}"

    def stop_name(self, details: StopDetails) -> str:
        """The stop's name, or the localized placeholder when it is unknown."""
        return details.display_name or self.message("unknown_stop")

    def format_stop(self, stop: StopRef, details: StopDetails) -> str:
        """Format a stop as "seq. name"."""
        return f"{stop.sequence_number}. {self.stop_name(details)}"

    def format_slot(self, slot: EtaSlot) -> str:
        """Format one board slot."""
        label = self.message("slot_label", index=slot.index)
        if slot.status is SlotStatus.NO_ESTIMATE:
            return f"{label} : {self.message('no_estimate')}"
        if slot.status is SlotStatus.CANCELLED:
            return f"{label} : {self.message('cancelled')}"
        if slot.status is SlotStatus.SCHEDULED:
            return f"{label} : {slot.display_time} {self.message('scheduled')}"
        real_time = f"{slot.display_time} {self.message('real_time')}"
        if slot.delayed:
            return f"{label} {self.message('delayed')} : {real_time}"
        return f"{label} : {real_time}"

    def format_board(
        self,
        board: ReconciledBoard | DataUnavailable,
        stop_label: str,
        is_origin_terminus: bool = False,
    ) -> list[str]:
        """Format a whole board, or the replacement message shown in its place."""
        if isinstance(board, DataUnavailable):
            return [self.message("eta_unavailable", stop=stop_label)]
        if is_origin_terminus and not board.has_estimates:
            return [self.message("origin_terminus")]
        return [self.message("board_title")] + [self.format_slot(slot) for slot in board.slots]


def is_origin_terminus(route: Route, stop: StopRef) -> bool:
    """True for the first stop of an outbound variant."""
    return route.bound is Bound.OUTBOUND and stop.sequence_number == 1


def _jsonable(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, dict):
        return {k: _jsonable(v) for k, v in value.items()}
    if isinstance(value, list | tuple):
        return [_jsonable(v) for v in value]
    return value


def to_jsonable(value: Any) -> Any:
    """Convert domain objects (dataclasses, lists, sentinels) to JSON-ready values."""
    if isinstance(value, DataUnavailable):
        return {"unavailable": value.error.model_dump()}
    if isinstance(value, dict):
        return {k: to_jsonable(v) for k, v in value.items()}
    if isinstance(value, list | tuple):
        return [to_jsonable(v) for v in value]
    if hasattr(value, "__dataclass_fields__"):
        return _jsonable(asdict(value))
    return _jsonable(value)
