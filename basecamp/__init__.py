"""basecamp - 多代码仓批量管理工具"""

__version__ = "0.2.0"
