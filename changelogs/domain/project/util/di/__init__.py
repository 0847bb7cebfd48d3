from changelogs.domain.project.util.di.provider import ProjectProvider

__all__ = ["ProjectProvider"]
