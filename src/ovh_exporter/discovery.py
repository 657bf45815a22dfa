import structlog

from ovh_exporter.models import Project
from ovh_exporter.provider.base import OVHClient

logger = structlog.get_logger()


class DiscoveryError(Exception):
    """
    raised when the set of projects cannot be enumerated.
    """


async def discover_projects(
    client: "OVHClient",
    log: "structlog.stdlib.BoundLogger | None" = None,
) -> "list[Project]":
    """
    lists the cloud projects visible to the client and resolves
    their display names. Discovery runs once at startup so it is
    all or nothing: any failed request raises DiscoveryError and
    no partial list is returned.
    """
    log = log or logger

    try:
        project_ids = await client.get("/cloud/project")
        if not isinstance(project_ids, list):
            raise TypeError(
                f"expected a list of project ids, got {type(project_ids).__name__}"
            )

        projects: "list[Project]" = []
        for project_id in project_ids:
            detail = await client.get(f"/cloud/project/{project_id}")
            if not isinstance(detail, dict):
                raise TypeError(
                    f"expected a project object for {project_id}, "
                    f"got {type(detail).__name__}"
                )
            projects.append(Project.from_api(detail, project_id=str(project_id)))

    except Exception as e:
        raise DiscoveryError(f"project discovery failed: {e}") from e

    for project in projects:
        log.info(
            "project_discovered",
            project_id=project.id,
            project_name=project.display_name,
        )
    return projects
