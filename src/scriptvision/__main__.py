# -*- coding: utf-8 -*-
"""
scriptvision/__main__.py

支持 `python -m scriptvision`；直接转发到 cli.main()，不在这里放业务逻辑。
"""

from .cli import main

if __name__ == "__main__":
	main()
