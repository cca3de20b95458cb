"""GitHub Issue Creator.

Create GitHub issues for the repository in the current working tree:
- GitHub remote detection from `git` remotes
- a stored personal access token
- an interactive form with label and milestone hints
"""

__version__ = "0.1.0"

from github_issue_creator.config import IssueCreatorSettings

__all__ = ["__version__", "IssueCreatorSettings"]
