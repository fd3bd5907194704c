"""
Example of estimating the man hours behind a repository.

This example demonstrates:
1. Cloning a remote repository into a temporary directory
2. Estimating man hours for a mid level developer
3. Printing the trace
4. Looking at the most expensive commits
"""

import time

from gitmanhours import Repository, TraceLog

if __name__ == "__main__":
    print("Cloning repository...")
    start_time = time.time()

    trace = TraceLog()
    with Repository("https://github.com/andyg2/estimate-repo-hours") as repo:
        result = repo.man_hours_estimate(experience="mid", trace=trace)

    print(trace.getvalue())

    commits = result.commits_frame()
    print("\nMost expensive commits:")
    print(commits.sort_values("hours", ascending=False)[["commit_sha", "message", "hours"]].head(5))

    print("\nHours by day:")
    print(commits.groupby(commits.index.date)["hours"].sum().round(2))

    end_time = time.time()
    print(f"\nAnalysis completed in {end_time - start_time:.2f} seconds")
