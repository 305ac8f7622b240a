"""FieldSync Core -- 领域模型、键值持久化与任务排序"""
