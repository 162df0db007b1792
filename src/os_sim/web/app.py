"""Flask application factory for the simulator's JSON API.

The ``create_app`` function wires every engine to one POST endpoint.
Each request carries a complete workload; the response carries the
complete result.  Nothing is stored between requests except the
simulation log.

- ``GET /api/algorithms`` — selectors accepted by each engine.
- ``POST /api/cpu`` and ``POST /api/cpu/compare`` — CPU scheduling.
- ``POST /api/memory`` — contiguous memory allocation.
- ``POST /api/paging`` and ``POST /api/paging/compare`` — page replacement.
- ``POST /api/disk`` — disk head scheduling.
- ``GET /api/log`` — simulation log entries.
"""

from __future__ import annotations

import os
from dataclasses import asdict
from typing import Any

from flask import Flask, Response, jsonify, request

from os_sim.config import SimulatorConfig
from os_sim.io.disk import DiskAlgorithm, DiskResult, parse_cylinders, run_disk_schedule
from os_sim.logging import Logger, LogLevel
from os_sim.memory.allocator import AllocationResult, FitStrategy, run_memory_allocation
from os_sim.memory.paging import (
    PagingResult,
    ReplacementAlgorithm,
    compare_policies,
    parse_reference_string,
    run_page_replacement,
)
from os_sim.process.scheduler import (
    CpuAlgorithm,
    ScheduleResult,
    compare_algorithms,
    run_cpu_schedule,
)
from os_sim.workload import ConfigurationError, MemoryRequest, Process

_HTTP_BAD_REQUEST = 400


# -- Decoding -----------------------------------------------------------------


def _body() -> dict[str, Any]:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        msg = "Request body must be a JSON object"
        raise ConfigurationError(msg)
    return data


def _field(data: dict[str, Any], name: str) -> Any:
    if not isinstance(data, dict) or name not in data:
        msg = f"Missing '{name}' field"
        raise ConfigurationError(msg)
    return data[name]


def _list_field(data: dict[str, Any], name: str) -> list[Any]:
    value = _field(data, name)
    if not isinstance(value, list):
        msg = f"'{name}' must be a list, got {type(value).__name__}"
        raise ConfigurationError(msg)
    return value


def _processes(data: dict[str, Any]) -> list[Process]:
    return [
        Process(
            id=_field(item, "id"),
            arrival_time=_field(item, "arrival_time"),
            burst_time=_field(item, "burst_time"),
            priority=item.get("priority", 0),
        )
        for item in _list_field(data, "processes")
    ]


def _requests(data: dict[str, Any]) -> list[MemoryRequest]:
    return [
        MemoryRequest(id=_field(item, "id"), size=_field(item, "size"))
        for item in _list_field(data, "requests")
    ]


def _references(data: dict[str, Any]) -> list[Any]:
    references = _field(data, "references")
    if isinstance(references, str):
        return parse_reference_string(references)
    return _list_field(data, "references")


def _cylinders(data: dict[str, Any]) -> list[int]:
    requests = _field(data, "requests")
    if isinstance(requests, str):
        return parse_cylinders(requests)
    return _list_field(data, "requests")


# -- Encoding -----------------------------------------------------------------


def _schedule_json(result: ScheduleResult) -> dict[str, Any]:
    return {
        "algorithm": str(result.algorithm),
        "timeline": [asdict(block) for block in result.timeline],
        "metrics": {str(pid): asdict(m) for pid, m in result.metrics.items()},
        "avg_waiting": result.avg_waiting,
        "avg_turnaround": result.avg_turnaround,
        "total_time": result.total_time,
    }


def _allocation_json(result: AllocationResult) -> dict[str, Any]:
    return {
        "strategy": str(result.strategy),
        "blocks": [asdict(block) for block in result.blocks],
        "log": [
            {
                "request_id": entry.request_id,
                "status": str(entry.status),
                "detail": entry.detail,
                "message": str(entry),
            }
            for entry in result.log
        ],
    }


def _paging_json(result: PagingResult) -> dict[str, Any]:
    return {
        "algorithm": str(result.algorithm),
        "history": [{"frames": list(step.frames), "is_fault": step.is_fault} for step in result.history],
        "fault_count": result.fault_count,
        "hit_ratio": result.hit_ratio,
    }


def _disk_json(result: DiskResult) -> dict[str, Any]:
    return {
        "algorithm": str(result.algorithm),
        "path": list(result.path),
        "seek_cost": result.seek_cost,
    }


# -- Application --------------------------------------------------------------


def create_app(config: SimulatorConfig | None = None) -> Flask:
    """Create and configure the Flask application.

    Args:
        config: Request defaults; read from ``OS_SIM_*`` environment
            variables when omitted.

    Returns:
        A configured Flask application ready to serve.

    """
    if config is None:
        config = SimulatorConfig.from_environment(os.environ)
    logger = Logger(
        min_level=LogLevel.DEBUG if config.debug else LogLevel.INFO,
        max_entries=config.log_capacity,
    )

    app = Flask(__name__)
    app.config["SIMULATOR"] = config
    app.config["SIMULATION_LOG"] = logger

    @app.errorhandler(ConfigurationError)
    def bad_configuration(error: ConfigurationError) -> tuple[Response, int]:  # pyright: ignore[reportUnusedFunction]
        """Turn a validation failure into a 400 with its message."""
        logger.log(LogLevel.WARNING, f"rejected {request.path}: {error}", source="web")
        return jsonify({"error": str(error)}), _HTTP_BAD_REQUEST

    @app.route("/api/algorithms")
    def algorithms() -> Response:  # pyright: ignore[reportUnusedFunction]
        """List the selector values each engine accepts."""
        return jsonify(
            {
                "cpu": [a.value for a in CpuAlgorithm],
                "memory": [s.value for s in FitStrategy],
                "paging": [a.value for a in ReplacementAlgorithm],
                "disk": [a.value for a in DiskAlgorithm],
            }
        )

    @app.route("/api/cpu", methods=["POST"])
    def cpu() -> Response:  # pyright: ignore[reportUnusedFunction]
        """Run one CPU scheduling algorithm.

        Expects JSON body: ``{"processes": [...], "algorithm": "...", "quantum": n}``
        """
        data = _body()
        result = run_cpu_schedule(
            _processes(data),
            _field(data, "algorithm"),
            quantum=data.get("quantum", config.quantum),
            logger=logger,
        )
        return jsonify(_schedule_json(result))

    @app.route("/api/cpu/compare", methods=["POST"])
    def cpu_compare() -> Response:  # pyright: ignore[reportUnusedFunction]
        """Run every CPU scheduling algorithm on the same workload."""
        data = _body()
        results = compare_algorithms(
            _processes(data),
            quantum=data.get("quantum", config.quantum),
            logger=logger,
        )
        return jsonify([_schedule_json(r) for r in results.values()])

    @app.route("/api/memory", methods=["POST"])
    def memory() -> Response:  # pyright: ignore[reportUnusedFunction]
        """Run one contiguous allocation strategy."""
        data = _body()
        result = run_memory_allocation(
            data.get("total_memory", config.total_memory),
            _requests(data),
            _field(data, "strategy"),
            logger=logger,
        )
        return jsonify(_allocation_json(result))

    @app.route("/api/paging", methods=["POST"])
    def paging() -> Response:  # pyright: ignore[reportUnusedFunction]
        """Run one page replacement policy.

        Expects JSON body: ``{"frames_count": n, "references": [...], "policy": "..."}``
        """
        data = _body()
        result = run_page_replacement(
            data.get("frames_count", config.frames_count),
            _references(data),
            _field(data, "policy"),
            logger=logger,
        )
        return jsonify(_paging_json(result))

    @app.route("/api/paging/compare", methods=["POST"])
    def paging_compare() -> Response:  # pyright: ignore[reportUnusedFunction]
        """Run every page replacement algorithm on the same stream."""
        data = _body()
        results = compare_policies(
            data.get("frames_count", config.frames_count),
            _references(data),
            logger=logger,
        )
        return jsonify([_paging_json(r) for r in results.values()])

    @app.route("/api/disk", methods=["POST"])
    def disk() -> Response:  # pyright: ignore[reportUnusedFunction]
        """Run one disk scheduling algorithm."""
        data = _body()
        result = run_disk_schedule(
            _field(data, "head"),
            _cylinders(data),
            data.get("max_cylinders", config.max_cylinders),
            _field(data, "algorithm"),
            logger=logger,
        )
        return jsonify(_disk_json(result))

    @app.route("/api/log")
    def log() -> Response:  # pyright: ignore[reportUnusedFunction]
        """Return the simulation log, oldest first."""
        return jsonify([str(entry) for entry in logger.entries])

    return app


def main() -> None:
    """Run the web API development server.

    This is the ``os-sim-web`` console entry point.
    """
    app = create_app()
    app.run(debug=app.config["SIMULATOR"].debug, port=8080)
