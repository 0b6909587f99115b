"""Formatters for project metadata and the configured project table."""

from tracker_cli._utils import _get_field
from tracker_cli.formatters._table import _sanitize_str, _table, _trunc

PROJECT_LABEL_WIDTH = 22


def _field(label, value):
    text = "" if value is None else _sanitize_str(str(value))
    return f"{label + ':':<{PROJECT_LABEL_WIDTH}}{text}"


def format_project(project):
    """Format project metadata, followed by a blank line."""
    if not project:
        return "Project not found."
    point_scale = project.get("point_scale", "")
    if isinstance(point_scale, (list, tuple)):
        point_scale = ",".join(str(p) for p in point_scale)
    lines = [
        _field("Name", project.get("name", "")),
        _field("Point Scale", point_scale),
    ]
    start = _get_field(project, "first_iteration_start_time", "start_time")
    if start:
        lines.append(_field("Iterations Start", start))
    weeks = _get_field(project, "iteration_length", "weeks_per_iteration")
    lines.append(_field("Weeks per Iteration", weeks))
    lines.append("")
    return "\n".join(lines)


def format_project_list(projects):
    """Format the configured {name: id} project table."""
    if not projects:
        return "No named projects found."
    rows = [(_trunc(name, 30), str(pid)) for name, pid in sorted(projects.items())]
    return _table([("Project", 30), ("ID", 0)], rows, f"Total: {len(rows)} projects")
