from src.context.resolver import LOCAL_CONTEXT, RepoContext, resolve_repo_context

__all__ = [
    "LOCAL_CONTEXT",
    "RepoContext",
    "resolve_repo_context",
]
