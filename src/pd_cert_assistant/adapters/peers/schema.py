"""Pydantic models describing the pd-assistant peer API payloads."""

from __future__ import annotations

from pydantic import StrictStr, TypeAdapter

API_IPS_PATH = "/api/v1/ips"
API_ALL_IPS_PATH = "/api/v1/allips"

IPListAdapter: TypeAdapter[list[StrictStr]] = TypeAdapter(list[StrictStr])
