"""
acsdeploy modules.

Each subpackage exposes its public interface from __init__ and hides
its implementation details.
"""
