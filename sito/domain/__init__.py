"""Domain packages - one per workflow, each with schemas, repository, service and router"""
