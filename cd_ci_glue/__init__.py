"""
Script: cd_ci_glue package
What: Holds Python pipeline helpers for CI/CD builds.
Doing: Groups branch-push checks, Docker Hub publishing, and GitHub documentation commits behind one CLI.
Why: Keeps pipeline glue readable and testable instead of sourcing a shell library into every build.
Goal: Provide one clear, maintainable home for publish steps shared across projects.
"""
