"""Shared Kernel module.

Small set of components shared by the provisioning context and the
shared infrastructure, currently the observation context bound to
domain probes.
"""
