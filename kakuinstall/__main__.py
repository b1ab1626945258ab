from kakuinstall import run_as_a_module

run_as_a_module()
