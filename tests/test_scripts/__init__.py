"""Script tests"""
