"""Git metadata pre-step for content rendering.

Fetches the commit history of the file being rendered and writes its
committers and last-modified date into the render context.
"""

__version__ = "0.1.0"
