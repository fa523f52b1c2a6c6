"""业务服务层

每个函数对应一个 RPC 过程：校验输入、经由 access 模块确认归属、操作数据库，
并返回 ORM 对象交由路由序列化。所有函数只 flush，不 commit，
事务边界由 get_db 按请求统一管理。
"""
