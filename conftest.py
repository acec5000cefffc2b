"""
Root pytest configuration; its presence puts the repository root on sys.path
so the ``datagrid`` package imports without installation.
"""
