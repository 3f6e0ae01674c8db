"""HR Portal package.

Organized by feature modules (accounts, departments, employees, requests,
workflows) with a thin Flask controller layer on top of service and
repository layers.
"""
