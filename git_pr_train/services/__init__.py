"""Services for git-pr-train."""
