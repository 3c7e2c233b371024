"""Services for testimony and deposition preparation"""
