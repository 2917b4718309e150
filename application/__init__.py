"""
Application Layer for the workout session service.

This package contains:
- ports/: Abstract repository interfaces (what the application needs)
- services/: The active workout tracker and its set sync
- use_cases/: Read-side use cases (history, completion calendar)
"""
