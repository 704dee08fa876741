from __future__ import annotations

from flask import Flask, jsonify, request, send_file

from ..common.responses import domain_error, error_response, server_error
from ..container import Container
from ..core.constants import ALLOWED_IMPORT_EXTENSIONS, EXPORT_FILE_NAME, XLSX_MIMETYPE
from ..core.exceptions import DomainError
from .model import student_to_dict


def register(app: Flask, container: Container) -> None:
    prefix = app.config.get("API_PREFIX", "/api")
    students = container.student_service

    def _payload() -> dict:
        return request.get_json(silent=True) or {}

    @app.route(f"{prefix}/students", methods=["GET"], endpoint="list_students")
    def list_students():
        try:
            rows = students.list_students(
                search=request.args.get("search", ""),
                major=request.args.get("major", ""),
            )
            return jsonify([student_to_dict(s) for s in rows])
        except DomainError as e:
            return domain_error(e)
        except Exception as e:
            return server_error(app, "Failed to list students", e)

    @app.route(f"{prefix}/students", methods=["POST"], endpoint="create_student")
    def create_student():
        data = _payload()
        try:
            students.create_student(
                student_id=data.get("student_id"),
                name=data.get("name"),
                major=data.get("major"),
            )
            return jsonify({"message": "Student added"})
        except DomainError as e:
            return domain_error(e)
        except Exception as e:
            return server_error(app, "Failed to add student", e)

    @app.route(f"{prefix}/students/<int:id>", methods=["PUT"], endpoint="update_student")
    def update_student(id: int):
        data = _payload()
        try:
            students.update_student(
                id,
                student_id=data.get("student_id"),
                name=data.get("name"),
                major=data.get("major"),
            )
            return jsonify({"message": "Student updated"})
        except DomainError as e:
            return domain_error(e)
        except Exception as e:
            return server_error(app, "Failed to update student", e)

    @app.route(f"{prefix}/students/<int:id>", methods=["DELETE"], endpoint="delete_student")
    def delete_student(id: int):
        try:
            students.delete_student(id)
            return jsonify({"message": "Student deleted"})
        except DomainError as e:
            return domain_error(e)
        except Exception as e:
            return server_error(app, "Failed to delete student", e)

    @app.route(f"{prefix}/students/import", methods=["POST"], endpoint="import_students")
    def import_students():
        upload = request.files.get("file")
        if upload is None or not upload.filename:
            return error_response("Please upload an Excel file", 400)
        if not upload.filename.lower().endswith(ALLOWED_IMPORT_EXTENSIONS):
            return error_response("Only .xlsx files are supported", 400)

        try:
            report = students.import_workbook(upload.stream)
            return jsonify(
                {
                    "message": f"Import finished: {report.success} succeeded, {report.fail} failed",
                    "stats": report.to_dict(),
                }
            )
        except DomainError as e:
            return domain_error(e)
        except Exception as e:
            return server_error(app, "Excel import failed", e)

    @app.route(f"{prefix}/students/export", methods=["GET"], endpoint="export_students")
    def export_students():
        try:
            output = students.export_workbook()
        except DomainError as e:
            return domain_error(e)
        except Exception as e:
            return server_error(app, "Excel export failed", e)

        return send_file(
            output,
            mimetype=XLSX_MIMETYPE,
            as_attachment=True,
            download_name=EXPORT_FILE_NAME,
        )
