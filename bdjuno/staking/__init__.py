"""Staking operations: delegation and validator handling."""