"""订阅子系统核心业务逻辑."""
