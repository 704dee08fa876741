from __future__ import annotations

from flask import Flask, jsonify

from ..common.responses import domain_error, server_error
from ..container import Container
from ..core.exceptions import DomainError


def register(app: Flask, container: Container) -> None:
    prefix = app.config.get("API_PREFIX", "/api")
    stats = container.stats_service

    @app.route(f"{prefix}/stats/total", methods=["GET"], endpoint="stats_total")
    def stats_total():
        try:
            t = stats.totals()
            return jsonify(
                {
                    "studentCount": t.student_count,
                    "callCount": t.call_count,
                    "avgScore": f"{t.avg_score:.2f}",
                    "majorCount": t.major_count,
                }
            )
        except DomainError as e:
            return domain_error(e)
        except Exception as e:
            return server_error(app, "Failed to load statistics", e)

    @app.route(f"{prefix}/stats/score-rank", methods=["GET"], endpoint="stats_score_rank")
    def stats_score_rank():
        try:
            return jsonify(
                [{"name": r.name, "current_score": f"{r.current_score:.2f}"} for r in stats.score_rank()]
            )
        except DomainError as e:
            return domain_error(e)
        except Exception as e:
            return server_error(app, "Failed to load ranking", e)

    @app.route(f"{prefix}/stats/major-dist", methods=["GET"], endpoint="stats_major_dist")
    def stats_major_dist():
        try:
            return jsonify([{"major": m.major, "count": m.count} for m in stats.major_distribution()])
        except DomainError as e:
            return domain_error(e)
        except Exception as e:
            return server_error(app, "Failed to load major distribution", e)
