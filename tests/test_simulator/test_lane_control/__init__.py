"""Lane-discipline strategy and lane assignment tests"""
