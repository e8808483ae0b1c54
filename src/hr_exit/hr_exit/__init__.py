"""HR exit-management package.

Organized by feature modules (resignations, users) with a thin Flask
controller layer on top of service/repository layers.
"""
