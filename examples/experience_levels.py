"""
Example of comparing experience levels on one clone.

The repository is cloned once and its log is estimated for a junior, mid and senior
developer in turn.
"""

from gitmanhours import Experience, Repository, estimate_hours

if __name__ == "__main__":
    with Repository("https://github.com/andyg2/estimate-repo-hours") as repo:
        lines = repo.log_lines()

    for experience in Experience:
        result = estimate_hours(lines, experience=experience)
        print(f"{experience.value:>6}: {result.total_hours:8.2f} hours over {result.totals.total_commits} commits")
