"""src/nsqtransport/utils/__init__.py"""
