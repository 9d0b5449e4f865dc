"""画布交互与多边形接口客户端"""
