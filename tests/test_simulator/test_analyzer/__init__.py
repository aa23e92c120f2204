"""Flow statistics and end-to-end run tests"""
