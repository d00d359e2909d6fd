"""Splitting SQL input into statements, executing them and printing results."""