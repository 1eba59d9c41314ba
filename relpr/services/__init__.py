"""Application services for relpr.

Services implement the release workflows, coordinating between the core
layer (core/) and infrastructure (git/, platform/).
"""
