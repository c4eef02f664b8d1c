import logging
import numpy as np
from c45py import C45Classifier, C45ModelSelection, Dataset

logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

feats = ["outlook", "temperature", "humidity", "windy"]
X = np.array([
    ["sunny", 85, 85, "false"], ["sunny", 80, 90, "true"],
    ["overcast", 83, 86, "false"], ["rainy", 70, 96, "false"],
    ["rainy", 68, 80, "false"], ["rainy", 65, 70, "true"],
    ["overcast", 64, 65, "true"], ["sunny", 72, 95, "false"],
    ["sunny", 69, 70, "false"], ["rainy", 75, 80, "false"],
    ["sunny", 75, 70, "true"], ["overcast", 72, 90, "true"],
    ["overcast", 81, 75, "false"], ["rainy", 71, 91, "true"],
], dtype=object)
y = np.array(["no", "no", "yes", "yes", "yes", "no", "yes",
              "no", "yes", "yes", "yes", "yes", "yes", "no"])

data = Dataset.from_arrays(X, y, feature_names=feats,
                           categorical_features=["outlook", "windy"])
split = C45ModelSelection(2, data).select(data)
print(f"root split: {data.attribute(split.att_index).name} -> {split!r}")

clf = C45Classifier(feature_names=feats, categorical_features=["outlook", "windy"]).fit(X, y)
print(f"nodes: {clf.tree_.num_nodes()}, leaves: {clf.tree_.num_leaves()}, "
      f"training accuracy: {clf.score(X, y):.3f}")
