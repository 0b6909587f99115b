"""Project resolution: named project, explicit ID, or configured default."""

from tracker_cli.exceptions import ProjectResolutionError


def resolve_project_id(settings, project=None, project_id=None):
    """Return the effective project ID.

    Priority: a named project (must exist in the project table), then an
    explicit numeric ID (not checked, the service validates it), then the
    configured default project, which may be None when unconfigured.
    """
    if project is not None:
        resolved = settings.project_id(project)
        if resolved is None:
            raise ProjectResolutionError("[ERROR] Invalid Project Name.")
        return resolved
    if project_id is not None:
        return project_id
    return settings.project_id(settings.default_project)


def resolve(options, settings):
    return resolve_project_id(settings, project=options.project, project_id=options.project_id)
